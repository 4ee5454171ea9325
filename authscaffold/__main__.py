from authscaffold.pipeline import main

main()
