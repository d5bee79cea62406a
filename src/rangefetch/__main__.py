from rangefetch import main

main()
