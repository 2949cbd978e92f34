import sys

from pdftool.cli import main

sys.exit(main())
