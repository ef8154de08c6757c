from examiner.cli.app import main

main()
