# Command line entry point for the inference load test.
# Usage: python benchmark.py http://host:port users batch_size iterations timeout_ms

import sys
from src.loadtest import main


if __name__ == "__main__":
    sys.exit(main())
