"""
Envcrypt encrypts environment files and keeps them in sync with their encrypted copies.

Files are encrypted with AES-GCM using a secret key and an initialization vector. Without an
explicit IV a random one is generated for each encryption and stored alongside the ciphertext.

Configure the secret key (applies to all commands):

\b
    $ export ENVCRYPT_SECRET_KEY="correct horse battery staple"

Encrypt a plaintext file into 'secrets/out.enc':

\b
    $ envcrypt encrypt .env --output secrets

Decrypt an encrypted file into '.env':

\b
    $ envcrypt decrypt secrets/out.enc --output .

Encrypt or decrypt a single value without writing any files:

\b
    $ envcrypt encrypt --no-write "API_TOKEN=hunter2"

Regenerate whichever of the pair is older from the one that was modified last:

\b
    $ envcrypt sync secrets/out.enc .env
"""

__version__ = '1.0.0'
