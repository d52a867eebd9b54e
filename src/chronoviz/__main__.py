from chronoviz.cli import main

main()
