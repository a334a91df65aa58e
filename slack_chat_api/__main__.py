from slack_chat_api.cli import main

main()
