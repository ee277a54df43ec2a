"""First-run wizard: asks for the bot settings and writes them to .env"""
from pathlib import Path

QUESTIONS = [
    ("BOT_TOKEN", "Enter your Telegram Bot Token: ", ""),
    ("BOT_USERNAME", "Enter your bot username (with @): ", ""),
    ("API_BASE_URL", "Enter TikTok API URL: ", "https://zorouchiha.serv00.net/tiktok/api.php"),
    ("ADMIN_IDS", "Enter admin IDs (comma separated): ", ""),
    ("PORT", "Enter port number: ", "3000"),
]


def ask(prompt=input) -> dict:
    answers = {}
    for name, question, default in QUESTIONS:
        answers[name] = prompt(question).strip() or default
    return answers


def write_env(answers: dict, path=".env") -> Path:
    path = Path(path)
    path.write_text("\n".join(f"{k}={v}" for k, v in answers.items()) + "\n", encoding="utf-8")
    return path


def main():
    print("🎉 TikTok Bot Setup Wizard\n")
    path = write_env(ask())
    print(f"\n✅ {path} file created successfully!")
    print("\nNext steps:")
    print("1. pip install -e .")
    print("2. python main.py")


if __name__ == "__main__":
    main()
