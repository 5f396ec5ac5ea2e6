from toolcheck.main import main

main()
