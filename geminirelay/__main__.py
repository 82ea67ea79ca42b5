from geminirelay.cli import main

main()
