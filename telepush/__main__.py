import sys

from telepush.telepushCli import main

sys.exit(main())
