from refdoc import main

main()
