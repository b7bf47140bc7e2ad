from gotestreport.cli import main

main()
