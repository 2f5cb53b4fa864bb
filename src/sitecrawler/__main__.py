"""
python -m sitecrawler https://example.com/
"""
from sitecrawler.cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
