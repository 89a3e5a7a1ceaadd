from memo_engine.adapters.textual.app import main

main()
