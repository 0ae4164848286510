from asnpeers.cli import main

main()
