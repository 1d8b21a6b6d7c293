"""Allow ``python -m spot2lidarr``."""

from spot2lidarr.main import main

raise SystemExit(main())
