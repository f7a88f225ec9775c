from k8sexec.cli import main

main()
