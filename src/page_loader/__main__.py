from page_loader.cli import main

raise SystemExit(main())
