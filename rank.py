#!/usr/bin/env python3
"""
rank.py - Convenience entry point for the Classics Ranking Bot.
Usage: python rank.py config.json

This simply delegates to rankbot.main.main(). All arguments are passed through.
"""
from rankbot.main import main

if __name__ == "__main__":
    main()
