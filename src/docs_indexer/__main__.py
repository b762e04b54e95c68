import sys

from docs_indexer.cli import main

sys.exit(main())
