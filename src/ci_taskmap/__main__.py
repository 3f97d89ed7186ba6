from ci_taskmap.cli.main import main

raise SystemExit(main())
