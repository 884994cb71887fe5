from geotabular.main import main

main()
