from feed_publisher.app import main

main()
