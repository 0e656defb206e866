import sys

from nekolink.main import main

sys.exit(main())
