#!/usr/bin/env python3
"""
商品到貨監控主程式
"""
import sys

from restock.cli import main


if __name__ == "__main__":
    sys.exit(main())
