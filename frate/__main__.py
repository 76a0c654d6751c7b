from frate.cli.app import main

main()
