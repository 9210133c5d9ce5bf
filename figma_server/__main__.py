from figma_server.main import main

main()
