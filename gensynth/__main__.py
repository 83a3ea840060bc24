from gensynth.main import main

main()
