"""Entry point for running trade_analytics as a module.

Usage:
    python -m trade_analytics [command] [options]

Commands:
    summary     Show the KPI dashboard
    charts      Show monthly PNL and high/low series
    trades      Show the trade table
    export      Write report files

Examples:
    python -m trade_analytics summary trades.csv
    python -m trade_analytics charts trades.csv --pair EUR/USD
    python -m trade_analytics trades p1.png p2.png --sort profit_or_loss --desc
    python -m trade_analytics export trades.csv -f csv,xlsx
"""

import sys

from trade_analytics.interfaces.cli import main

if __name__ == "__main__":
    sys.exit(main())
