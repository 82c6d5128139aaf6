import sys

from serial_image_bridge.main import main


sys.exit(main())
