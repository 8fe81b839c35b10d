#!/usr/bin/env python3
"""
Prospector - Main Entry Point

Convenience wrapper around scripts/analyze_leads.py.

Usage:
    python main.py "Joe's Pizza, Austin TX" [--category ...] [--competitor ...]

Environment Variables:
    GOOGLE_PLACES_API_KEY: Required. Your Google Places API key.
"""

from scripts.analyze_leads import main

if __name__ == "__main__":
    main()
