# kumabot

A set of chat-bot features that does not depend on any bot framework. Each
module takes plain values and either returns plain values or raises an
exception. You connect it to your own messaging layer.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Modules

| Module | What it does |
| --- | --- |
| `kumabot.runcode` | Posts code to an online compiler service and returns its output. Long output is trimmed after 30 lines or 1000 characters. Provides `run_code`, `lookup_language`, `parse_result`, `cut_too_long`, and `handle_runcode`, which answers a `>runcode <language> <code>` message. |
| `kumabot.wtf` | A catalogue of name-based quizzes run through a remote API. Provides `new_wtf`, `format_list`, `Wtf.url`, `Wtf.predict` and `handle_query`. |
| `kumabot.score` | SQLite-backed daily sign-in. Each sign-in adds one point, and the score is capped at 120. Provides `ScoreDB`, `sign_in` (returns a `SignInResult`), `get_level`, `next_level_score` and `get_hour_word`. `draw_sign_in` draws the sign-in card with Pillow. |
| `kumabot.tiangou` | `TiangouDB`: an SQLite table of diary lines with `add`, `count` and a random `pick`. |
| `kumabot.sleep_manage` | `SleepDB` records good-morning and good-night times per group member. It returns the member's rank for the day and the time slept or spent awake. Also provides `is_morning`, `is_evening`, `time_duration`, `good_morning_text` and `good_night_text`. |
| `kumabot.wordle` | `WordleGame` is a word-guessing game. It checks length and dictionary, allows a fixed number of attempts, gives per-letter `Mark` feedback, and `render()` returns a PNG board. `load_words` and `class_from_name` help set up a game. |
| `kumabot.wangyiyun` | `fetch_hot_comment` fetches a random hot music comment as text. |
| `kumabot.tarot` | `TarotDeck.from_json` builds a deck from card and spread JSON. The deck supports `draw`, `info`, `card_list_text` and `spread`. Also provides `parse_draw_command` and `card_image_url`. |
| `kumabot.word_count` | `WordCounter` counts Chinese words that are not stop words. Also provides `load_stopwords`, `rank_by_word_count` and `clamp_message_count`. |
| `kumabot.thesaurus` | `Thesaurus` picks a random canned reply for a known phrase and can be built from a JSON object. |
| `kumabot.vtb_model` | `VtbDB` stores vtuber voice clips in three levels: vtuber, clip group and clip. It builds the numbered menus and can download the vtuber list and pages (`fetch_vtb_list`, `fetch_vtb_page`). |
| `kumabot.vtb_quotation` | `QuotationSession` is a three-step menu conversation that ends with a chosen clip. Also provides `random_quotation`, `escape_record_url`, `record_filename` and `download_record`. |
| `kumabot.shadiao` | Fetches assorted quips with `fetch_shadiao`, `fetch_sweet_nothing` and `fetch_duanzi`. `extract_luther` and `fetch_luther_insult` return an insult. |

## Example

```python
from datetime import datetime
from kumabot.score import ScoreDB, sign_in
from kumabot.wordle import WordleGame, load_words

with ScoreDB("score.db") as db:
    result = sign_in(db, 10001, datetime.now())
    print(result.score, result.level)

words = load_words("apple\ngrape\nlemon")
game = WordleGame("apple", words)
game.guess("grape")
print(game.marks())
```

Functions that reach the network accept an optional `session` argument. Pass
a `requests.Session` or any object with the same `get`/`post`/`request`
methods to control proxies or to test offline. If you leave it out, the
function creates a fresh `requests.Session`.

`kumabot.runcode` sends a form token. It reads this token from the
`KUMABOT_RUNCODE_TOKEN` environment variable and falls back to a fixed
placeholder when the variable is not set.

## What this package does not do

- It has no bot runtime. There is no command-line program, no connection to a
  chat server, and no message routing. Each feature has to be called by your
  own code.
- It does not ship data files. You must supply the tarot card and spread JSON,
  the wordle word lists, the stop-word list, the thesaurus JSON and the diary
  lines yourself.
- `kumabot.score` does not download sign-in backgrounds and does not draw
  score-ranking charts. `draw_sign_in` uses Pillow's default font, and any
  characters that font cannot draw are replaced.
- `kumabot.word_count` does not fetch chat history or split text into words,
  and it does not draw charts. You feed it the words yourself.

## Running the tests

```
pytest
```