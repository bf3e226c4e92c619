from roulette.main import main

main()
