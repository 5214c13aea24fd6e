import sys

from svcpack.main import main

sys.exit(main())
