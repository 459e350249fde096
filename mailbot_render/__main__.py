import sys

import mailbot_render.start as start

sys.exit(start.main())
