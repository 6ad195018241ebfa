import sys

from spacelint.engine.runner import main

sys.exit(main())
