from refsync_cli.main import main

main()
