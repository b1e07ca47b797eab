import sys

from image_cache_proxy.cli import main

sys.exit(main())
