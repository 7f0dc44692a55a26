from heartscene.main import main

main()
