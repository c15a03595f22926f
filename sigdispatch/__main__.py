from sigdispatch.cli import main

main()
