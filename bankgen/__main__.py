from bankgen.cli import main

raise SystemExit(main())
