"""Source adapters for restaurant/bar owner discovery.

Each adapter is a stateless async function taking a shared httpx client:
  1. Yelp business page → "Meet the Business Owner", claimed-by, listing info
  2. Google Places → listing info + most frequent review-response signer
  3. Apollo people search → named contacts at a domain
  4. Website scraping → /about, /team, /contact pages (JSON-LD + regex)
  5. Hunter → domain search, email pattern, email finder, email verifier

All of them return a record from models.py, or None when nothing was found
or the call failed.
"""
