import sys

from dazibao.main import main

sys.exit(main())
