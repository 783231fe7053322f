from binrc.cli.app import main

main()
