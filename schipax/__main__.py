from schipax.cli import main

raise SystemExit(main())
