from mandelclick.cli import main

raise SystemExit(main())
