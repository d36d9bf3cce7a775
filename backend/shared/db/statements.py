"""SQL statements used by the login service.

Timestamps are bound as parameters (time.time() seconds) rather than computed
by SQLite so the service clock is the only time source.
"""

AUTO_BAN_AUTHOR = "Login Gateway"
AUTO_BAN_REASON = "Failed login autoban"

# (now, login) -> id, email, sha_pass_hash, failed_logins, login_ticket, login_ticket_expiry, is_banned
SEL_AUTHENTICATION = """\
SELECT a.id, a.email, a.sha_pass_hash, a.failed_logins, a.login_ticket, a.login_ticket_expiry,
       (ab.account_id IS NOT NULL AND (ab.unbandate > ? OR ab.unbandate = ab.bandate)) AS is_banned
FROM accounts AS a
LEFT JOIN account_bans AS ab ON ab.account_id = a.id
WHERE a.email = ? COLLATE NOCASE"""

# (now, candidate_ticket, login_ticket_expiry, account_id) -> login_ticket
# The candidate only replaces a missing or expired ticket, so concurrent logins
# all end up with whichever ticket was stored first.
UPD_AUTHENTICATION = """\
UPDATE accounts SET
    login_ticket = CASE
        WHEN login_ticket IS NULL OR login_ticket = '' OR login_ticket_expiry IS NULL OR login_ticket_expiry <= ?
        THEN ? ELSE login_ticket END,
    login_ticket_expiry = ?
WHERE id = ?
RETURNING login_ticket"""

# (login_ticket, now) -> username, expansion, bandate, unbandate, ban_reason
SEL_GAME_ACCOUNT_LIST = """\
SELECT ga.username, ga.expansion, gab.bandate, gab.unbandate, gab.ban_reason
FROM game_accounts AS ga
INNER JOIN accounts AS a ON a.id = ga.account_id
LEFT JOIN game_account_bans AS gab ON gab.game_account_id = ga.id AND gab.active = 1
WHERE a.login_ticket = ? AND a.login_ticket_expiry > ?
ORDER BY ga.id"""

# (login_ticket) -> login_ticket_expiry
SEL_EXISTING_AUTHENTICATION = "SELECT login_ticket_expiry FROM accounts WHERE login_ticket = ?"

# (login_ticket_expiry, login_ticket)
UPD_EXISTING_AUTHENTICATION = "UPDATE accounts SET login_ticket_expiry = ? WHERE login_ticket = ?"

# (account_id)
UPD_FAILED_LOGINS = "UPDATE accounts SET failed_logins = failed_logins + 1 WHERE id = ?"

# The ban and reset statements only touch rows once the counter reached the
# threshold, so the decision is made inside the transaction that incremented it.

# (bandate, unbandate, account_id, max_count)
INS_ACCOUNT_AUTO_BANNED = f"""\
INSERT INTO account_bans (account_id, bandate, unbandate, banned_by, ban_reason)
SELECT id, ?, ?, '{AUTO_BAN_AUTHOR}', '{AUTO_BAN_REASON}' FROM accounts WHERE id = ? AND failed_logins >= ?
ON CONFLICT (account_id) DO UPDATE SET
    bandate = excluded.bandate,
    unbandate = excluded.unbandate,
    banned_by = excluded.banned_by,
    ban_reason = excluded.ban_reason"""

# (ip, bandate, unbandate, account_id, max_count)
INS_IP_AUTO_BANNED = f"""\
INSERT INTO ip_bans (ip, bandate, unbandate, banned_by, ban_reason)
SELECT ?, ?, ?, '{AUTO_BAN_AUTHOR}', '{AUTO_BAN_REASON}' FROM accounts WHERE id = ? AND failed_logins >= ?
ON CONFLICT (ip) DO UPDATE SET
    bandate = excluded.bandate,
    unbandate = excluded.unbandate,
    banned_by = excluded.banned_by,
    ban_reason = excluded.ban_reason"""

# (account_id, max_count)
UPD_RESET_FAILED_LOGINS = "UPDATE accounts SET failed_logins = 0 WHERE id = ? AND failed_logins >= ?"
