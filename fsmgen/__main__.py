from fsmgen.cli import main

raise SystemExit(main())
