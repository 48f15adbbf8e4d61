"""Default extraction task sent to the agent."""

DEFAULT_TASK = """
Analyze the latest 10 tweets from the X.com following page to extract cashtags and contract addresses (CAs) as follows:

1. Identify cashtags (e.g., $TOKEN) and their corresponding contract addresses (CAs).
  - Add the results to a JSON array:
    Example: [{ "cashtag": "$TOKEN", "contract_address": "CA" }]
2. If a cashtag is found but no CA is included:
  - Search X.com for the CA (max 10 tweets of search).
  - If found, add it to the JSON array. Otherwise, add: { "cashtag": "$TOKEN", "contract_address": null }.
3. If a token is mentioned without a cashtag:
  - Record it as: { "cashtag": "unknown_cashtag", "contract_address": "CA" } (or null if no CA is found).
4. If something is being shilled in the tweet but there is no cashtag or CA, search X.com for key words of the message to find the cashtag or the CA, then follow the previous points.
5. If nothing is found, skip the tweet. Do not return empty entries like:
  - { "cashtag": "unknown_cashtag", "contract_address": null }

The final output should only contain a JSON array of the format:
[
  { "cashtag": "$TOKEN", "contract_address": "CA" },
  { "cashtag": "unknown_cashtag", "contract_address": null }
]

Do not include any additional text, explanations, or metadata outside the JSON array.
"""
