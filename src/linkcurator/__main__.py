from linkcurator.cli import main

raise SystemExit(main())
