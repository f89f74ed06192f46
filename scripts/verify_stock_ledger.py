import sys
import os
import argparse

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sparestock.core import SessionLocal
from sparestock.services.ledger_service import LedgerService


def verify(code=None):
    db = SessionLocal()
    try:
        print("--- Verifying Stock Ledger ---")
        drift = LedgerService.find_drift(db)
        if code:
            drift = [d for d in drift if d["code"] == code.strip().upper()]

        if not drift:
            print("✅ Ledger consistent: current stock matches movements")
            return 0

        print(f"{'Code':<20} | {'Current':>8} | {'Expected':>8} | {'Diff':>6}")
        print("-" * 52)
        for d in drift:
            print(f"{d['code']:<20} | {d['current_stock']:>8} | {d['expected_stock']:>8} | {d['difference']:>+6}")
        print("-" * 52)
        print(f"❌ {len(drift)} sparepart(s) drifted")
        return 1

    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Compare current stock with initial stock plus movements")
    parser.add_argument("--code", help="Only report this sparepart code")
    args = parser.parse_args()
    sys.exit(verify(args.code))
