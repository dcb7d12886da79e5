from fauxpenshift.cli import main

main()
