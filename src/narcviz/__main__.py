import sys

from narcviz.app import main

sys.exit(main())
