from sqli.cli import main

raise SystemExit(main())
