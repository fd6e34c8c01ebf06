from castdeploy import main

main()
