import logging

from scorekid.config import VOLLEYBALL
from scorekid.display import display_score
from scorekid.match_session import MatchSession
from scorekid.storage import InMemoryMatchStore

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

session = MatchSession(VOLLEYBALL, profile_id="demo")

# Set 1: my team
for _ in range(25):
    session.update_score("my_team")

# Set 2: rival
for _ in range(25):
    session.update_score("rival_team")

# Set 3: my team
for _ in range(25):
    session.update_score("my_team")

# Set 4: rival
for _ in range(25):
    session.update_score("rival_team")

# Set 5: long deuce, 17-15
for _ in range(14):
    session.update_score("my_team")
    session.update_score("rival_team")

session.update_score("my_team")  # 15-14, not enough
session.update_score("rival_team")  # 15-15
session.update_score("my_team")  # 16-15
status = session.update_score("my_team")  # 17-15 -> match winner

print(status.message)
print(display_score(session.score, VOLLEYBALL))

print("\nTrying to add a point after the match...")
print(session.update_score("rival_team"))  # ignored by the session

store = InMemoryMatchStore()
match = session.save(store, notes="Final del torneo")
print("\nSaved:", match.id, match.result, [s.to_dict() for s in match.score.sets])
