"""
Sample Analysis Runner
Posts a sample seller plan to a running API and prints the report, checking
the cashflow table on the way.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import requests
from decimal import Decimal
from typing import Dict, Any

from formatting import format_rupiah


SAMPLE_PLAN = {
    "productName": "Sambal Roa Nona Manis",
    "targetSegment": "Office workers who like spicy food",
    "sellPrice": 150000,
    "costOfGoods": 80000,
    "adCost": 20000,
    "otherCostsPercentage": 15,
    "fixedCostsPerMonth": 5000000,
    "avgSalesPerMonth": 200,
    "totalMarketingBudget": 1000000,
    "initialMarketingBudget": 10000000,
    "useSocialMediaAds": True,
    "useKOLs": True,
    "useVideoContent": False,
}


class SampleAnalysisRunner:
    """
    Runs the sample plan against the analysis API.
    """

    def __init__(self, base_url: str = "http://localhost:8000"):
        self.base_url = base_url
        self.session = requests.Session()

    def run_projection(self, plan: Dict[str, Any]) -> Dict[str, Any]:
        """Projection only, no AI calls"""
        response = self.session.post(f"{self.base_url}/analysis/projection", json=plan)
        response.raise_for_status()
        return response.json()

    def run_analysis(self, plan: Dict[str, Any]) -> Dict[str, Any]:
        """Full report. Prints the API error body on failure."""
        response = self.session.post(f"{self.base_url}/analysis", json=plan)
        if response.status_code != 200:
            print(f"ERROR {response.status_code}: {response.json()}")
            response.raise_for_status()
        return response.json()

    def check_cashflow(self, report: Dict[str, Any]) -> bool:
        """Each month must open at the previous month's close"""
        table = report["cashflowTable"]
        ok = len(table) == 12
        for previous, current in zip(table, table[1:]):
            if Decimal(current["startCash"]) != Decimal(previous["endCash"]):
                print(f"FAIL Month {current['month']}: start {current['startCash']} != previous end {previous['endCash']}")
                ok = False
        print(f"Cashflow recurrence: {'PASS' if ok else 'FAIL'}")
        return ok

    def print_report(self, report: Dict[str, Any]):
        print("\n" + "="*50)
        print("SELLER PROJECTION")
        print("="*50)
        print(f"Monthly revenue: {format_rupiah(Decimal(report['monthlyRevenue']))}")
        print(f"Monthly profit:  {format_rupiah(Decimal(report['monthlyProfit']))}")
        print(f"Annual profit:   {format_rupiah(Decimal(report['annualProfit']))}")
        print(f"ROAS:            {report['roas']}")
        for row in report["pnlTable"]:
            sign = "-" if row["isNegative"] else " "
            print(f"  {sign} {row['label']}: {format_rupiah(Decimal(row['value']))}")
        for warning in report["warnings"]:
            print(f"WARNING: {warning}")

        if "marketEvaluation" in report:
            print("\nMarket evaluation:")
            print(f"  {report['marketEvaluation']['evaluation']}")
            print(f"  {report['marketEvaluation']['keyConsiderations']}")
            print("\nRecommendations:")
            for item in report["strategicPlan"]["recommendations"]:
                print(f"  - {item}")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Run the sample seller analysis")
    parser.add_argument("--base-url", type=str, default="http://localhost:8000", help="API base URL")
    parser.add_argument("--projection-only", action="store_true", help="Skip the AI consultation")

    args = parser.parse_args()

    runner = SampleAnalysisRunner(base_url=args.base_url)
    if args.projection_only:
        report = runner.run_projection(SAMPLE_PLAN)
    else:
        report = runner.run_analysis(SAMPLE_PLAN)

    runner.print_report(report)
    sys.exit(0 if runner.check_cashflow(report) else 1)
