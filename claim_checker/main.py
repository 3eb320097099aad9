"""Main script for running the claim checker."""

import asyncio
import logging

from .infrastructure.dependencies import get_service_container


async def main():
    """Run the claim checker."""
    print("Claim Checker - claim extraction and web-evidence verification")
    print("--------------------------------------------------------------")

    container = get_service_container()
    service = await container.get_fact_checking_service()

    try:
        while True:
            # Get text from user
            text = input("\nEnter text to check (or 'quit' to exit): ")
            if text.lower() in ('quit', 'exit', 'q'):
                break
            if not text.strip():
                continue

            print("\nExtracting claims...")
            try:
                claims = await service.extract_claims(text)
                print(f"Found {len(claims)} claims")
                for claim in claims:
                    print(f"  [{claim.id}] {claim.exact_text!r} ({claim.start}-{claim.end})")

                print("\nSearching and verifying...")
                claims = await service.search_and_verify(claims)

                # Print results
                print("\nResults:")
                for claim in claims:
                    confidence = "n/a" if claim.confidence is None else f"{claim.confidence}%"
                    print(f"\n[{claim.id}] {claim.claim_text}")
                    print(f"Status: {claim.status.value} (confidence {confidence})")
                    print(f"Explanation: {claim.explanation}")
                    if claim.suggested_fix:
                        print(f"Suggested fix: {claim.suggested_fix}")
                    if claim.error:
                        print(f"Error: {claim.error}")
                    for source in claim.sources:
                        print(f"  {{{{{source.source_number}}}}} {source.stance.value} {source.url}")

            except Exception as e:
                print(f"\nError checking claims: {e}")

    finally:
        # Clean up
        await container.shutdown()


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    asyncio.run(main())
