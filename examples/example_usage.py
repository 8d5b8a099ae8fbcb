#!/usr/bin/env python3
"""
Example usage of the Transport Order Parser
Runs a sample booking confirmation through the assistant and prints the order.
"""

import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from transport_order_parser import BookingPdfAssistant, ParserConfig, UnsupportedDocumentError


def create_sample_booking_lines():
    """Lines as they come out of a chartering/booking confirmation PDF."""
    text = """
    CHARTERING CONFIRMATION
    Ziegler Ref 99821
    Invoicing Adress
    TRANSALLIANCE UK LTD
    Unit 4 Kingsway
    Business Park
    GB-PE2 6DP PETERBOROUGH
    Rate
    1 250,50
    EUR
    Collection 1
    ACME PAPER MILL
    12/05/2024
    08h00 - 12h00
    GB-LS1 4AP LEEDS
    Collection 2
    BETA PAPER
    13/05/2024
    HULL HU1 2AA
    Delivery
    GAMMA STORE
    -37530 POCE-SUR-CISSE
    """
    return [line.strip() for line in text.splitlines() if line.strip()]


def print_order(order):
    print(json.dumps(order, indent=2, ensure_ascii=False))


def main():
    logging.basicConfig(level=logging.INFO)

    lines = create_sample_booking_lines()

    print("=" * 60)
    print("DEMONSTRATION: Booking PDF Assistant")
    print("=" * 60)
    assistant = BookingPdfAssistant(order_sink=print_order)
    assistant.process_lines(lines, "Chartering_99821.pdf")

    print("\n" + "=" * 60)
    print("DEMONSTRATION: no fabricated timestamps")
    print("=" * 60)
    strict = BookingPdfAssistant(ParserConfig(date_fallback="none"))
    record = strict.process_lines(lines)
    for location in record.destination_locations:
        print(f"{location.company_address.company}: {location.time.to_dict() or 'no date'}")

    print("\n" + "=" * 60)
    print("DEMONSTRATION: unsupported document")
    print("=" * 60)
    try:
        assistant.process_lines(["INVOICE", "Total 120,00"])
    except UnsupportedDocumentError as e:
        print(f"Rejected: {e}")


if __name__ == "__main__":
    main()
