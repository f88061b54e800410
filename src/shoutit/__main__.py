from shoutit.cli import main

main()
