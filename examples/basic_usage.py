"""Basic usage example for logstats.

needs a reachable elasticsearch, e.g.:

    LOGSTATS_HOST=http://localhost:9200 python examples/basic_usage.py
"""

import os
import sys
from pathlib import Path

# Add parent to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from logstats import RunConfig, StatisticsStore
from logstats.output.writer import write_report
from logstats.parser.loader import load_client_ids


def main():
    """Fetch current-month stats for two endpoints of every example client."""
    here = Path(__file__).parent
    client_file = here / "clients.json"

    config = RunConfig(
        host=os.environ.get("LOGSTATS_HOST", "http://localhost:9200"),
        filters={"app": "my_app", "level": "INFO"},
        endpoints={"endpointName": ["endp-1", "endp-2"]},
        output=here / "stats.json",
        monthly=True,
        client_ids=load_client_ids(client_file),
    )

    with StatisticsStore(config) as store:
        print("Base search:")
        print(store.base_request().to_dict())
        report = store.build_report()

    for client_id, endpoints in report.client_list.items():
        for endpoint, stats in endpoints.items():
            days = stats.get("daysum", [])
            total = sum(entry.count for entry in days)
            print(f"{client_id:<12} {endpoint:<10} {total:>8} requests over {len(days)} days")

    print(f"\nWritten to {write_report(report, config.output)}")


if __name__ == "__main__":
    main()
