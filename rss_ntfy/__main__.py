from rss_ntfy.main import main

main()
